from fastapi import Request

from mtgscanner.services.scanner import ScannerSession


def get_scanner(request: Request) -> ScannerSession:
    """
    Dependency that provides the application's scanner session.

    The session is created in the application lifespan and stored on
    app.state. Tests override this dependency.
    """
    scanner: ScannerSession = request.app.state.scanner
    return scanner
