from permit_portal.client.identity import Identity, IdentityProvider
from permit_portal.client.wizard import ApplicationWizard
