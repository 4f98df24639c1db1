"""Display formatting for prices, carbon and delivery times."""


def format_price(amount: float) -> str:
    """Format a currency amount in USD, dropping trailing zero cents."""
    if float(amount).is_integer():
        return f"${int(amount):,}"
    return f"${amount:,.2f}"


def format_carbon(kg: float) -> str:
    return f"{round(kg)}kg CO2"


def format_delivery(days: int) -> str:
    """Human delivery estimate ("Same day", "3 days", "2 weeks")."""
    if days == 0:
        return "Same day"
    if days == 1:
        return "1 day"
    if days < 7:
        return f"{days} days"
    weeks = days // 7
    return "1 week" if weeks == 1 else f"{weeks} weeks"


def pluralize_days(days: int) -> str:
    return f"{days} day" if days == 1 else f"{days} days"
