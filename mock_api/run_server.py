#!/usr/bin/env python3
"""
Startup script for the mock connector host.
"""

import uvicorn

if __name__ == "__main__":
    print("Starting Mock Connector Host...")
    print("Available endpoints:")
    print("  - GET    /          : Health check")
    print("  - POST   /callback  : Receive one page of descriptors")
    print("  - GET    /pages     : List received pages")
    print("  - DELETE /pages     : Clear received pages")
    print("  - POST   /reject    : Reject the next callbacks")
    print("\nServer will be available at: http://localhost:8001")
    print("Point the connector at it with CONNECTOR_CALLBACK_URL=http://localhost:8001")

    uvicorn.run(
        "mock_api.server:app",
        host="0.0.0.0",
        port=8001,
        reload=False,
        log_level="info"
    )
