"""Allow running the API as: python -m bot_state [--config path]."""

from bot_state.api.runner import main

main()
