"""
Identifiants de transaction: "TXN-" + millisecondes depuis l'epoch.
- Monotone dans le processus: si l'horloge n'a pas avancé (requêtes simultanées),
  on émet dernier+1 pour garantir l'unicité.
"""
import threading
import time
from typing import Callable

PREFIX = "TXN-"

_lock = threading.Lock()
_last_millis = 0

def new_transaction_id(clock: Callable[[], float] = time.time) -> str:
    global _last_millis
    with _lock:
        millis = int(clock() * 1000)
        if millis <= _last_millis:
            millis = _last_millis + 1
        _last_millis = millis
    return f"{PREFIX}{millis}"
