"""Collaborators used by the scheduler: storage, feed lists, inspection and chat channels."""
