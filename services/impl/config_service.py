"""
Config Service Implementation.

Centralized configuration management for the secure QR decoder pipeline.
Loads configuration from application_config.json organized by service.

Follows:
- SRP: Only handles configuration management
- DIP: Provides configuration to other services via interface
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List


from services.interfaces.config_service_interface import IConfigService


logger = logging.getLogger(__name__)


class ConfigService(IConfigService):
    """
    Implementation of IConfigService.

    Loads and manages application configuration from application_config.json.
    Configuration is organized by service section (s1_camera,
    s2_qr_localization, etc.). Getters fall back to the documented
    defaults when a key is missing.
    """

    def __init__(self, configPath: str = "config/application_config.json"):
        """
        Initialize ConfigService.

        Args:
            configPath: Path to the configuration file.

        Raises:
            RuntimeError: If the file cannot be loaded.
        """
        self._config: Dict[str, Any] = {}
        self._configPath = Path(configPath)
        self._debugEnabled = False

        # Load config (required)
        if not self.loadConfig(configPath):
            raise RuntimeError(f"Failed to load configuration from: {configPath}")

    def loadConfig(self, configPath: str) -> bool:
        """Load configuration from JSON file."""
        try:
            path = Path(configPath)
            if not path.exists():
                logger.error(f"Config file not found: {configPath}")
                return False

            with open(path, 'r', encoding='utf-8') as f:
                config = json.load(f)

            if not isinstance(config, dict):
                logger.error(f"Config root must be an object: {configPath}")
                return False

            self._config = config

            # Initialize debug state from config
            self._debugEnabled = bool(self.get("debug.enabled", False))

            logger.info(f"Configuration loaded from: {path.absolute()}")
            return True

        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in config file: {e}")
            return False
        except OSError as e:
            logger.error(f"Failed to load config: {e}")
            return False

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Generic Config Access
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key with dot notation support.

        Examples:
            get("s1_camera.frameWidth") -> 1280
            get("s2_qr_localization.backend") -> "zxing"
            get("s5_age_derivation.adultAge") -> 18
        """
        value = self._config
        for part in key.split('.'):
            if not isinstance(value, dict):
                return default
            value = value.get(part)
            if value is None:
                return default
        return value

    def getServiceConfig(self, serviceName: str) -> Dict[str, Any]:
        """
        Get all configuration for a specific service.

        Args:
            serviceName: Service name (e.g., "s1_camera", "s5_age_derivation")

        Returns:
            Configuration dictionary for the service.
        """
        config = self._config.get(serviceName, {})
        return config if isinstance(config, dict) else {}

    def getAllConfig(self) -> Dict[str, Any]:
        """Get complete configuration dictionary."""
        return self._config.copy()

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Debug Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def getDebugBasePath(self) -> str:
        """Get base path for debug output."""
        return self.get("debug.basePath", "output/debug")

    def isDebugEnabled(self) -> bool:
        """Check if debug mode is enabled."""
        return self._debugEnabled

    def setDebugEnabled(self, enabled: bool) -> None:
        """Enable or disable debug mode at runtime."""
        self._debugEnabled = enabled
        logger.info(f"Debug mode {'enabled' if enabled else 'disabled'}")

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # App Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def getAppConfig(self) -> Dict[str, Any]:
        """Get app-level configuration."""
        return self.getServiceConfig("app")

    def getOutputIndent(self) -> int:
        """Get JSON indent used for CLI output."""
        return self.get("app.outputIndent", 2)

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # S1 Camera Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def getCameraConfig(self) -> Dict[str, Any]:
        """Get camera configuration."""
        return self.getServiceConfig("s1_camera")

    def getCameraIndex(self) -> int:
        """Get default camera index."""
        return self.get("s1_camera.cameraIndex", 0)

    def getFrameWidth(self) -> int:
        """Get camera frame width."""
        return self.get("s1_camera.frameWidth", 1280)

    def getFrameHeight(self) -> int:
        """Get camera frame height."""
        return self.get("s1_camera.frameHeight", 720)

    def getMaxCameraSearch(self) -> int:
        """Get max camera search count."""
        return self.get("s1_camera.maxCameraSearch", 2)

    def getPollIntervalMs(self) -> int:
        """Get delay between live-feed decode attempts."""
        return self.get("s1_camera.pollIntervalMs", 100)

    def getMaxConsecutiveReadFailures(self) -> int:
        """Get number of failed reads in a row that ends a live scan."""
        return self.get("s1_camera.maxConsecutiveReadFailures", 30)

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # S2 QR Localization Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def getQrLocalizationConfig(self) -> Dict[str, Any]:
        """Get QR localization configuration."""
        return self.getServiceConfig("s2_qr_localization")

    def getQrBackend(self) -> str:
        """
        Get symbol-detection backend (zxing or pyzbar).

        Returns:
            str: Backend name, default "zxing".
        """
        backend = self.get("s2_qr_localization.backend", "zxing")
        return backend.lower()

    def isQrTryRotate(self) -> bool:
        """Check if ZXing try rotate is enabled."""
        return self.get("s2_qr_localization.zxingTryRotate", True)

    def isQrTryDownscale(self) -> bool:
        """Check if ZXing try downscale is enabled."""
        return self.get("s2_qr_localization.zxingTryDownscale", True)

    def getScanLongEdges(self) -> List[int]:
        """Get long-edge sizes tried after the native size."""
        return self.get("s2_qr_localization.longEdges", [800, 1000, 1200])

    def getScanFilters(self) -> List[str]:
        """Get image filters in scan order."""
        return self.get(
            "s2_qr_localization.filters",
            ["original", "highContrast", "grayscale", "binarize", "sharpen"]
        )

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # S3 Payload Decoding Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def getPayloadDecodingConfig(self) -> Dict[str, Any]:
        """Get payload decoding configuration."""
        return self.getServiceConfig("s3_payload_decoding")

    def isDecompressionEnabled(self) -> bool:
        """Check if payload inflation is attempted."""
        return self.get("s3_payload_decoding.decompress", True)

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # S4 Field Parsing Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def getFieldParsingConfig(self) -> Dict[str, Any]:
        """Get field parsing configuration."""
        return self.getServiceConfig("s4_field_parsing")

    def isDebugSavePhoto(self) -> bool:
        """Check if the embedded photo is written as a separate debug file."""
        return self.get("s4_field_parsing.debugSavePhoto", False)

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # S5 Age Derivation Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def getAgeDerivationConfig(self) -> Dict[str, Any]:
        """Get age derivation configuration."""
        return self.getServiceConfig("s5_age_derivation")

    def getAdultAge(self) -> int:
        """Get minimum age considered adult."""
        return self.get("s5_age_derivation.adultAge", 18)

    def getMaxAgeYears(self) -> int:
        """Get oldest plausible age in years."""
        return self.get("s5_age_derivation.maxAgeYears", 120)

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # S6 Verification Claim Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def getVerificationClaimConfig(self) -> Dict[str, Any]:
        """Get verification claim configuration."""
        return self.getServiceConfig("s6_verification_claim")

    def getReferencePrefixLength(self) -> int:
        """Get number of reference id characters used for ownership checks."""
        return self.get("s6_verification_claim.referencePrefixLength", 4)

    def getVerificationQrErrorCorrection(self) -> str:
        """Get verification QR error-correction level."""
        return self.get("s6_verification_claim.errorCorrection", "H")

    def getVerificationQrBorder(self) -> int:
        """Get verification QR quiet-zone width in modules."""
        return self.get("s6_verification_claim.border", 1)

    def getVerificationQrSize(self) -> int:
        """Get verification QR edge length in pixels."""
        return self.get("s6_verification_claim.size", 300)

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Performance Logging Settings
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def isPerformanceLoggingEnabled(self) -> bool:
        """Check if performance logging is enabled."""
        return self.get("debug.performanceLogging.enabled", True)

    def getPerformanceLogInterval(self) -> int:
        """Get performance log interval."""
        return self.get("debug.performanceLogging.logInterval", 1)
