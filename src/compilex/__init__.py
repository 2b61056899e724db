"""Compilex: a multi-language code execution service.

Submitted source code is staged into a throwaway workspace, compiled when
the language requires it and run under a wall-clock timeout.  The combined
output (or a structured failure) is returned to the caller.

The top-level modules include:

* ``config`` – configuration handling for environment variables.
* ``languages`` – the registry of supported language profiles.
* ``workspace`` – per-execution directories and source staging.
* ``executor`` – process supervision, build/run stages and the coordinator.
* ``errors`` – the engine's error taxonomy.
* ``models`` – Pydantic models defining request and response schemas.
* ``api`` – FastAPI application exposing HTTP endpoints.
"""
