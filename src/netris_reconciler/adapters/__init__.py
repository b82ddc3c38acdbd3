"""Adapters binding the domain ports to the Netris API and the Kubernetes API."""
