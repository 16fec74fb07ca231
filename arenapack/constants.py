"""Centralized constants for the arenapack package."""

# Settings file name - searched upward from the working directory
CONFIG_FILENAME = "arenapack.toml"

# Root of the shared workspace content volume
WORKSPACE_CONTENT_ROOT = "/workspace-content"

# Artifact URLs published on the loopback address are served in-cluster here
LOOPBACK_ARTIFACT_URL = "http://localhost:8082"
IN_CLUSTER_ARTIFACT_URL = "http://omnia-controller-manager.omnia-system:8082"

# Default timeout (seconds) for the artifact HTTP client
ARTIFACT_TIMEOUT = 30.0

# System templates longer than this are cut and suffixed with the marker
SYSTEM_TEMPLATE_MAX_LENGTH = 500
TRUNCATION_MARKER = "..."

# metadata.name of the empty results
NO_SOURCE = "No source"
SOURCE_NOT_FOUND = "Source not found"
NO_CONTENT_AVAILABLE = "No content available"
