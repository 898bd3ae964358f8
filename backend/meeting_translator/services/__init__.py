"""Business Logic Services.

This package contains all service modules that implement the core
business logic of the live meeting translator.

Service Categories:
- Audio: Chunk accumulation, PCM conversion, transcoding
- Filtering: Transcript admissibility rules
- Glossary: Term table parsing and the active glossary store
- Pipeline: Per-chunk controller, reorder buffer, room runtime
- Connection: WebSocket connection management
- Session: Active room directory and WebSocket orchestration

External integrations:
- engines: OpenAI Whisper transcription and chat translation
"""
