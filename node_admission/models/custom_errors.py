class ManifestLoadError(Exception):
    """
    Exception raised when a manifest file cannot be read or decoded.
    """
    pass

class InvalidObjectError(Exception):
    """
    Exception raised when an object is rejected at admission. Carries every
    field error found, not only the first one.
    """
    def __init__(self, kind: str, name: str, errors):
        self.kind = kind
        self.name = name
        self.errors = errors
        super().__init__(f'{kind} "{name}" is invalid: {errors}')
