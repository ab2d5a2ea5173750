"""
Certified Farm Registry App

Owns the registry of certified farms:
- Farm records, categories and operational status
- Certification lifecycle (certify / revoke)
- Collaborators and revenue-share agreements
- Bounded, append-only audit history per farm
- Admin authority and the global pause switch
"""
