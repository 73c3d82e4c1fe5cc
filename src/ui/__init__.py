"""NiceGUI interface for the travel chat.

Responsibilities:
    - Session state and the submit cycle (session.py)
    - HTTP calls to the forwarding endpoint (client.py)
    - Message, image preview and error rendering (chat_page.py)

Image validation and message construction happen here; normalization and
the inference call happen behind the API.
"""
