"""
handlers/ - Presentation Layer
================================
Telegram bot handlers. Each handler receives updates from Telegram,
delegates to the GameService, and sends the response back to the user.
No game logic lives here.
"""
