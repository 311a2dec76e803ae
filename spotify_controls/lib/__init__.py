"""Shared service plumbing: JSON config and the ControlBase service shell."""
