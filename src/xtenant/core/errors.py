from __future__ import annotations

class XTenantError(Exception):
    code = "xtenant_error"; hint = "Unknown error."
    def __init__(self, message: str = "", *, hint: str | None = None):
        super().__init__(message or self.__class__.__name__)
        if hint: self.hint = hint

# Fatal: stop the invocation before (or during) querying
class AuthenticationError(XTenantError):
    code = "not_connected"; hint = "Connect to the tenant before querying sign-ins."
class InvalidTenantId(AuthenticationError):
    code = "invalid_tenant_id"; hint = "Tenant ID invalid or unreachable."
class InvalidClientId(AuthenticationError):
    code = "invalid_client_id"; hint = "Client ID invalid."
class InvalidClientSecret(AuthenticationError):
    code = "invalid_client_secret"; hint = "Client Secret rejected."
class AuthNetworkError(AuthenticationError):
    code = "network_error"; hint = "Network or timeout issue."
class ConsentRequired(AuthenticationError):
    code = "consent_required"; hint = "Admin consent required for AuditLog.Read.All."

class ConfigurationError(XTenantError):
    code = "unsupported_api_version"
    hint = "Cross-tenant sign-in fields are only exposed by the Graph beta endpoint."

class ValidationError(XTenantError):
    code = "invalid_parameter"; hint = "Check the supplied parameters."

class QueryTimeoutError(XTenantError):
    code = "query_timeout"; hint = "Raise the deadline or narrow the query to one tenant."

# Non-fatal
class EmptyResultWarning(UserWarning):
    """No sign-in events matched the constructed filters."""
