class PersistenceError(Exception):
    """Raised when a database statement fails. The original error is chained."""
    def __init__(self, message="Database operation failed"):
        self.message = message
        super().__init__(self.message)

class AuthError(Exception):
    """Sign-in failure. `type` tells bad credentials apart from everything else."""
    CREDENTIALS_SIGNIN = "CredentialsSignin"
    CALLBACK_ROUTE_ERROR = "CallbackRouteError"

    def __init__(self, type=CREDENTIALS_SIGNIN, message="Authentication failed"):
        self.type = type
        self.message = message
        super().__init__(self.message)
