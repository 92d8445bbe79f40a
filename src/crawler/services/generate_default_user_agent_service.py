from copyaudit.core.managers.config_manager import config_manager


def generate_default_user_agent() -> str:
    """
    Builds the identifying User-Agent string sent with every audit request.

    An explicit 'session.user_agent' in settings.json wins; otherwise the
    product name and version from 'user_agent.*' are used.

    Returns:
        str: The constructed User-Agent string.
    """
    explicit = config_manager.get_nested("session.user_agent")
    if explicit:
        return str(explicit)

    product = config_manager.get_nested("user_agent.product", "CopyAudit")
    version = config_manager.get_nested("user_agent.version", "1.0")
    contact = config_manager.get_nested("user_agent.contact")

    details = f"compatible; {product}/{version}"
    if contact:
        details += f"; +{contact}"
    return f"Mozilla/5.0 ({details})"
