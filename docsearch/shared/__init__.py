"""Shared cross-cutting helpers: utilities and telemetry. No business logic."""
