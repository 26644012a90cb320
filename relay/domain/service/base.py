"""Base service class for domain services."""


class Service:
    """Base class for domain services.

    Domain services hold bridge logic that spans entities or wraps an
    external collaborator behind a domain-level contract.
    """

    pass
