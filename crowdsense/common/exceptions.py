class CrowdSenseError(Exception):
    """Base exception for all crowdsense errors."""
    pass

class ReportStoreError(CrowdSenseError):
    """Raised when reports cannot be fetched from or written to a store."""
    pass

class ConfigurationError(CrowdSenseError):
    """Raised when configuration is invalid."""
    pass

class AdvisoryUnavailableError(CrowdSenseError):
    """Raised when the advisory text generator fails or returns nothing."""
    pass

class EntityNotFoundError(CrowdSenseError):
    """Raised when an office id is unknown."""
    pass
