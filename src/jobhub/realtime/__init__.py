"""Real-time infrastructure — Redis pub/sub + WebSocket.

Learn: Events flow through two channels:
1. Services → Redis PUBLISH after a comment/like commit
2. Redis SUBSCRIBE → WebSocket → every browser viewing that job

This decouples event producers (services) from consumers (WebSocket clients).
"""
