"""
Setup-path resolution.

Remediation guidance often names an admin console page as a breadcrumb,
e.g. "Go to Setup > Security > Remote Site Settings." The resolver pulls
that breadcrumb out of free text and turns it into a deep link using a
static table keyed by lower-cased page names.
"""

import re
from types import MappingProxyType
from typing import List, Mapping, Optional

GENERIC_SETUP_URL = "/lightning/setup/SetupOneHome/home"

SETUP_URL_TABLE: Mapping[str, str] = MappingProxyType(
    {
        # Users and access
        "users": "/lightning/setup/ManageUsers/home",
        "profiles": "/lightning/setup/EnhancedProfiles/home",
        "permission sets": "/lightning/setup/PermSets/home",
        "permission set groups": "/lightning/setup/PermSetGroups/home",
        "roles": "/lightning/setup/Roles/home",
        "public groups": "/lightning/setup/PublicGroups/home",
        "queues": "/lightning/setup/Queues/home",
        "login history": "/lightning/setup/OrgLoginHistory/home",
        "identity verification": "/lightning/setup/IdentityVerification/home",
        "login flows": "/lightning/setup/LoginFlow/home",
        # Security
        "health check": "/lightning/setup/HealthCheck/home",
        "password policies": "/lightning/setup/SecurityPolicies/home",
        "session settings": "/lightning/setup/SecuritySession/home",
        "network access": "/lightning/setup/NetworkAccess/home",
        "remote site settings": "/lightning/setup/SecurityRemoteProxy/home",
        "cors": "/lightning/setup/CorsWhitelistEntries/home",
        "csp trusted sites": "/lightning/setup/SecurityCspTrustedSite/home",
        "trusted urls": "/lightning/setup/SecurityCspTrustedSite/home",
        "sharing settings": "/lightning/setup/SecuritySharing/home",
        "certificate and key management": "/lightning/setup/CertificatesAndKeysManagement/home",
        "file upload and download security": "/lightning/setup/FileTypeSetting/home",
        "platform encryption": "/lightning/setup/EncryptionSettings/home",
        "encryption settings": "/lightning/setup/EncryptionSettings/home",
        "view setup audit trail": "/lightning/setup/SecurityEvents/home",
        "event monitoring settings": "/lightning/setup/EventMonitoringSetup/home",
        # Identity and integrations
        "auth providers": "/lightning/setup/AuthProviders/home",
        "single sign-on settings": "/lightning/setup/SingleSignOn/home",
        "identity provider": "/lightning/setup/IdpPage/home",
        "named credentials": "/lightning/setup/NamedCredential/home",
        "connected apps": "/lightning/setup/ConnectedApplication/home",
        "manage connected apps": "/lightning/setup/ConnectedApplication/home",
        "connected apps oauth usage": "/lightning/setup/ConnectedAppsUsage/home",
        "installed packages": "/lightning/setup/ImportedPackage/home",
        # Platform and code
        "my domain": "/lightning/setup/OrgDomain/home",
        "company information": "/lightning/setup/CompanyProfileInfo/home",
        "all sites": "/lightning/setup/SetupNetworks/home",
        "sites": "/lightning/setup/CustomDomain/home",
        "apex classes": "/lightning/setup/ApexClasses/home",
        "apex triggers": "/lightning/setup/ApexTriggers/home",
        "apex jobs": "/lightning/setup/AsyncApexJobs/home",
        "scheduled jobs": "/lightning/setup/ScheduledJobs/home",
        "debug logs": "/lightning/setup/ApexDebugLogs/home",
        "visualforce pages": "/lightning/setup/ApexPages/home",
        "flows": "/lightning/setup/Flows/home",
        "custom settings": "/lightning/setup/CustomSettings/home",
        "custom metadata types": "/lightning/setup/CustomMetadata/home",
        "object manager": "/lightning/setup/ObjectManager/home",
        # Email
        "deliverability": "/lightning/setup/OrgEmailSettings/home",
        "organization-wide addresses": "/lightning/setup/OrgWideEmailAddresses/home",
    }
)

# "Setup", optional whitespace, ">" and everything up to the next period.
# Abbreviations such as "Auth. Providers" are cut short by this rule.
_BREADCRUMB = re.compile(r"setup\s*>[^.]*", re.IGNORECASE)
_SETUP_PREFIX = re.compile(r"^setup\s*>\s*")
_TRAILING_PUNCTUATION = ".,;: \t\r\n"


def extract_setup_path(text: Optional[str]) -> Optional[str]:
    """Return the first "Setup > ..." breadcrumb in text, or None."""
    if not text:
        return None
    match = _BREADCRUMB.search(text)
    if not match:
        return None
    return match.group(0).strip().rstrip(_TRAILING_PUNCTUATION).strip()


def _candidates(path: str) -> List[str]:
    remainder = _SETUP_PREFIX.sub("", path.lower())
    segments = [s.strip() for s in remainder.split(">")]
    segments = [s for s in segments if s]
    if not segments:
        return []

    candidates = [" > ".join(segments), segments[-1]]
    if len(segments) >= 2:
        # "Users > John Doe": the parent page is the one to open
        candidates.append(segments[-2])
    return candidates


def resolve_setup_url(remediation_text: Optional[str]) -> Optional[str]:
    """
    Resolve the deep link for the Setup page named in remediation text.

    Args:
        remediation_text: Free-text remediation guidance

    Returns:
        None when the text holds no "Setup >" breadcrumb. Otherwise the
        table URL of the first matching candidate (full path, leaf, then
        parent), or GENERIC_SETUP_URL when none match.
    """
    path = extract_setup_path(remediation_text)
    if path is None:
        return None

    for candidate in _candidates(path):
        url = SETUP_URL_TABLE.get(candidate)
        if url:
            return url
    return GENERIC_SETUP_URL
