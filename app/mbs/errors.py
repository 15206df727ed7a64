class ServiceError(RuntimeError):
    """An external collaborator (datastore, email API, auth provider) failed or is unreachable."""


class DatastoreError(ServiceError):
    pass


class MailerError(ServiceError):
    pass


class AuthProviderError(ServiceError):
    pass


class InvalidCredentials(AuthProviderError):
    pass
