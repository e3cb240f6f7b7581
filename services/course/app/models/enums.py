import sqlalchemy as sa

from shared.constants import Role

# Stored as the lowercase values ("user", "admin") so rows written by the
# external identity provider sync line up with the Role enum.
role_enum = sa.Enum(
    Role,
    name="user_role",
    values_callable=lambda e: [x.value for x in e],
)
