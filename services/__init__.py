# Services module for the secure QR decoder
# Contains pipeline services and orchestration

# Stage services are in services/impl/
# Import them directly from there:
# from services.impl.s2_qr_localization_service import S2QrLocalizationService
# from services.impl.s4_field_parsing_service import S4FieldParsingService
# etc.

__all__ = []
