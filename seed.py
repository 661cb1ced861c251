from dotback import create_app
from dotback.seeding import seed_data

app = create_app()

with app.app_context():
    admin, created = seed_data(include_levels=True)
    if admin is not None:
        print(f"Seeded admin {admin.email}.")
    else:
        print("Admin already present.")
    if created:
        print(f"Seeded levels {', '.join(str(n) for n in created)}.")
    else:
        print("All default levels already exist. No changes made.")
