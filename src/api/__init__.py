"""FastAPI endpoints for the chat front-end.

Thin HTTP layer between the browser and the S3 document bucket.

Endpoints:
    - GET /health: Service health status
    - POST /api/download: Cited document as a base64 data URL
    - POST /api/download-redirect: Presigned download URL for a cited document
    - GET /api/user: Guest profile for the chat UI
    - GET /attachments/{token}: Decoded attachment held for an open chat
"""
