from .frontend import (
    FrontendLaunchError,
    FrontendNotFoundError,
    FrontendProcess,
    find_frontend,
)

__all__ = ['FrontendLaunchError', 'FrontendNotFoundError', 'FrontendProcess', 'find_frontend']
