"""System checks for the session-token configuration."""

from django.core.checks import Error, register

from authentication.services import SigningError, TokenError, get_token_service


@register()
def token_service_can_sign(app_configs, **kwargs):
    """Sign and verify a probe token so a broken key fails at startup."""
    errors: list[Error] = []

    service = get_token_service()
    try:
        access, _ = service.issue("system-check", ["user"])
        service.verify(access, expected_type="access")
    except SigningError as exc:
        errors.append(
            Error(
                f"Session tokens cannot be signed: {exc.__cause__ or exc}",
                hint="Check the JWT_SECRET setting.",
                id="authentication.E001",
            )
        )
    except TokenError as exc:
        errors.append(
            Error(
                f"Freshly issued session tokens do not verify: {exc.detail}",
                hint="Check the JWT_* settings.",
                id="authentication.E002",
            )
        )

    return errors
