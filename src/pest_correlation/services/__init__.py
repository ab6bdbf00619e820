"""
Shared services.

- http.py      - Retrying ``requests`` session for outbound API calls
- weather.py   - Weather data operations: fetch-and-store, current, history,
                 delete by date
"""
