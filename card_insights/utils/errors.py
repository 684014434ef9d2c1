"""Custom exceptions for card spend analysis"""


class CardInsightsError(Exception):
    """Base exception for card spend analysis errors"""
    pass


class ConfigurationError(CardInsightsError):
    """Configuration loading errors"""
    pass


class DatasetLoadError(CardInsightsError):
    """Raw dataset could not be read"""
    pass


class DatasetValidationError(CardInsightsError):
    """Loaded dataset does not match the transaction schema"""
    pass


class AnalysisError(CardInsightsError):
    """Query template or problem statement errors"""
    pass
