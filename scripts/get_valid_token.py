import sys
import os

# Add the project root to sys.path
sys.path.append(os.getcwd())

from devicedesk.core.security import create_access_token

email = sys.argv[1] if len(sys.argv) > 1 else "alex.doe@example.com"
name = sys.argv[2] if len(sys.argv) > 2 else "Alex Doe"

token = create_access_token(subject=email, claims={"oid": email, "name": name})
print(f"access_token: {token}")
