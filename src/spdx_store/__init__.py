"""Object/property store for SPDX document metadata."""
