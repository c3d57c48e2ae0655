# weathermap/state.py

class AppState:
    def __init__(self):
        self.ready = False
        self.failure_reason = None
        self.initialization_start = None
        self.initialization_end = None
        self.last_fetch = None  # summary of the most recent precipitation run

app_state = AppState()
