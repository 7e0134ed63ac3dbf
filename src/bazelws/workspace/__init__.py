"""Workspace writing — path containment, package nesting, and marker synthesis.

Provides PathScope (with CreateScope / ReplaceScope conflict policies) for
confining writes under a root, and the Workspace / ModifiedWorkspace /
Package writers that build the directory tree.
"""
