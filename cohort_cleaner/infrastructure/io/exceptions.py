class CleanerInfrastructureError(Exception):
    pass


class DataSourceError(CleanerInfrastructureError):
    pass


class DataSourceNotFoundError(DataSourceError):
    pass


class DataParseError(DataSourceError):
    pass


class DataWriteError(CleanerInfrastructureError):
    pass
