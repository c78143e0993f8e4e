"""Masking of customer contact details for existing-customer views."""


def mask_email(email: str) -> str:
    """
    Mask the local part of an email, keeping two leading and trailing chars.

    >>> mask_email("johnathan@example.com")
    'JO*****AN@EXAMPLE.COM'
    """
    if not email:
        return ""
    name, sep, domain = email.partition("@")
    if not sep or not domain:
        return email

    if len(name) <= 2:
        masked = name[:1] + "*"
    else:
        masked = name[:2] + "*" * max(0, len(name) - 4) + name[-2:]

    return f"{masked}@{domain}".upper()


def mask_phone(phone: str) -> str:
    """Show only the last four digits of a phone number."""
    if not phone:
        return ""
    if len(phone) <= 4:
        return "*" * len(phone)
    return "******" + phone[-4:]
