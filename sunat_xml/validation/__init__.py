from sunat_xml.validation.monetary_validator import MonetaryConsistencyValidator, check_consistency

__all__ = [
    'MonetaryConsistencyValidator',
    'check_consistency',
]
