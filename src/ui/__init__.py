"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Chat message display with streaming "typing" updates
    - Inline PDF previews for cited documents, with a fullscreen viewer
    - Direct-download links and retry buttons when a preview fails
    - Preset questions and input suggestions

Contains no retrieval logic. Delegates to the chat session, stream
consumer, and attachment fetcher.
"""
