"""
Fides Vera - retrieval-augmented answers over a fixed Catholic corpus.

USAGE:
------
from fides_vera.app import create_application

app = create_application()
app.start()
chat, result = app.rag.start_chat("What are the theological virtues?")
print(result.content)
app.stop()
"""

__version__ = "0.1.0"
