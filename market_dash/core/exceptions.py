

class MarketDashError(Exception):
    """Base exception for all market_dash errors"""
    pass

class ConfigError(MarketDashError):
    """Invalid or inconsistent global.json / view config"""
    pass

class RecordSchemaError(MarketDashError):
    """
    A table view's record schema is inconsistent with itself
    (default sort on an undeclared field, dimension without a path, etc)
    """
    pass

class RecordSourceError(MarketDashError):
    """Base for failures talking to the backing table store"""
    pass

class FetchFailure(RecordSourceError):
    """Retrieving a table's rows failed; the store degrades to an empty collection"""
    pass

class MutationFailure(RecordSourceError):
    """A write (delete) against the backing table store failed"""
    pass

class AccessDenied(MarketDashError):
    """The current session may not open this view or perform this action"""
    pass
