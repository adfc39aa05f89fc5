def exceeds(temperature: float, threshold: float) -> bool:
    # A reading equal to the threshold is normal
    return temperature > threshold


def alert_message(device_name: str, temperature: float, threshold: float) -> str:
    return (
        "**[Temperature Alert]**\n\n"
        f"- Device: {device_name}\n"
        f"- Current temperature: **{temperature}°C**\n"
        f"- Exceeded the threshold ({threshold}°C)."
    )


def recovery_message(device_name: str, temperature: float) -> str:
    return (
        "**[Temperature Normal]**\n\n"
        f"- Device: {device_name}\n"
        f"- Current temperature: **{temperature}°C**\n"
        "- Back within the normal range."
    )
