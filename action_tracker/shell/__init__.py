"""
Imperative shell: the dispatch pipeline and router integration the tracker
plugs into.
"""
