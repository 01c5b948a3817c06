"""
Secure QR Identity Decoder

Main entry point for the command-line decoder.
Uses PipelineOrchestrator to initialize all services.

Usage:
    python main.py image card.jpg
    python main.py camera --camera-index 1
    python main.py decimal 12345...          (or "-" to read stdin)

Options shared by all commands:
    --verification-qr out.png --address 0xabc   write an age verification QR
    --liveness-verified                          liveness result for the claim
    --check-reference 1234                       compare reference id prefix
"""

import argparse
import json
import logging
import os
import signal
import sys
from typing import Any, Dict, List, Optional

from core.exceptions import DecoderError, PipelineError, ScanCancelledError
from core.interfaces.identity_record_interface import IdentityRecord
from core.processor.identity_claims import CLAIM_TYPE_AGE, SUPPORTED_CLAIM_TYPES
from services.live_scan_session import CancellationToken
from services.pipeline_orchestrator import DEFAULT_CONFIG_PATH, PipelineOrchestrator


EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CANCELLED = 130


def setupLogging(debugMode: bool = False) -> None:
    """
    Setup application logging.

    Args:
        debugMode: If True, set log level to DEBUG.
    """
    level = logging.DEBUG if debugMode else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def buildArgumentParser() -> argparse.ArgumentParser:
    """Create the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="secure-qr-decoder",
        description="Decode government-ID secure QR codes into identity records."
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG_PATH,
        help="Path to application_config.json"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose logging and debug output")
    parser.add_argument("--output", help="Write the JSON result to this file instead of stdout")
    parser.add_argument("--verification-qr", metavar="PNG", help="Write a verification QR image")
    parser.add_argument("--address", help="Account address embedded in the verification QR")
    parser.add_argument(
        "--claim-type", choices=SUPPORTED_CLAIM_TYPES, default=CLAIM_TYPE_AGE,
        help="Verification QR type"
    )
    parser.add_argument(
        "--liveness-verified", action="store_true",
        help="Mark the claim as liveness-verified"
    )
    parser.add_argument("--check-reference", metavar="DIGITS", help="Reference id prefix to verify")

    subparsers = parser.add_subparsers(dest="command", required=True)

    imageParser = subparsers.add_parser("image", help="Decode a QR in an image file")
    imageParser.add_argument("path", help="Image file (PNG, JPEG, ...)")

    cameraParser = subparsers.add_parser("camera", help="Scan the live camera feed (Ctrl-C cancels)")
    cameraParser.add_argument("--camera-index", type=int, default=None, help="Camera device index")

    decimalParser = subparsers.add_parser("decimal", help="Decode already-extracted QR text")
    decimalParser.add_argument("text", help="Decimal payload, or '-' to read stdin")

    return parser


def runCommand(
    orchestrator: PipelineOrchestrator,
    args: argparse.Namespace
) -> IdentityRecord:
    """Run the selected decode command."""
    if args.command == "image":
        return orchestrator.decodeFromFile(args.path)

    if args.command == "decimal":
        text = sys.stdin.read() if args.text == "-" else args.text
        return orchestrator.decodeFromDecimal(text)

    cancelToken = CancellationToken()
    previousHandler = signal.signal(signal.SIGINT, lambda signum, frame: cancelToken.cancel())
    try:
        return orchestrator.decodeFromLiveFeed(
            cancelToken=cancelToken,
            cameraIndex=args.camera_index
        )
    finally:
        signal.signal(signal.SIGINT, previousHandler)


def buildResult(
    orchestrator: PipelineOrchestrator,
    record: IdentityRecord,
    args: argparse.Namespace
) -> Dict[str, Any]:
    """Assemble the JSON document printed for a decoded record."""
    result: Dict[str, Any] = {"record": record.toSummary()}
    claimService = orchestrator.verificationClaimService

    if args.check_reference is not None:
        result["referenceMatches"] = claimService.matchesReferencePrefix(record, args.check_reference)

    if args.verification_qr:
        claim = claimService.buildClaim(record, args.liveness_verified)
        result["claim"] = claim.toDict()
        result["verificationQr"] = claimService.saveVerificationQr(
            args.claim_type, claim.proofId, args.address, args.verification_qr
        )

    return result


def writeResult(result: Dict[str, Any], outputPath: Optional[str], indent: int) -> None:
    """Print or save the JSON result."""
    text = json.dumps(result, indent=indent, ensure_ascii=False)
    if outputPath:
        with open(outputPath, 'w', encoding='utf-8') as f:
            f.write(text + "\n")
    else:
        print(text)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = buildArgumentParser()
    args = parser.parse_args(argv)

    if args.verification_qr and not args.address:
        parser.error("--verification-qr requires --address")

    debugMode = args.debug or os.environ.get("DEBUG", "").lower() == "true"
    setupLogging(debugMode=debugMode)

    logger = logging.getLogger(__name__)
    logger.info("Starting Secure QR Identity Decoder")

    try:
        orchestrator = PipelineOrchestrator(args.config)
    except (RuntimeError, ValueError, ImportError) as e:
        logger.error(f"Decoder failed to start: {e}")
        return EXIT_FAILED

    if args.debug:
        orchestrator.setDebugEnabled(True)

    try:
        record = runCommand(orchestrator, args)
        result = buildResult(orchestrator, record, args)
        writeResult(result, args.output, orchestrator.configService.getOutputIndent())
        return EXIT_OK

    except ScanCancelledError:
        logger.info("Scan cancelled")
        return EXIT_CANCELLED

    except PipelineError as e:
        logger.error(f"Decoding failed at stage '{e.stage}': {e.cause}")
        return EXIT_FAILED

    except DecoderError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return EXIT_FAILED

    except OSError as e:
        logger.error(f"Cannot write output: {e}")
        return EXIT_FAILED

    finally:
        orchestrator.shutdown()
        logger.info("Decoder terminated")


if __name__ == "__main__":
    sys.exit(main())
