class BenefitCycleError(ValueError):
    pass


class ConfigurationError(BenefitCycleError):
    pass


class UnsupportedCycleError(BenefitCycleError):
    pass
