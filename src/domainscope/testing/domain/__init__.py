"""
domainscope.testing.domain - Standard Domain Model Classes
===========================================================

Small ready-made entity models backing the StandardDomainModel bundles.
They are plain annotated classes; the model builder only reads their type
hints.
"""
