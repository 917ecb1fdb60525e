"""Provider-independent base layer: models, errors, logging, HTTP, tools,
streaming and orchestration."""
