import argparse
import sys

from freezer.core.constants import ROLES
from freezer.core.errors import FreezerError
from freezer.core.logging import setup_logging
from freezer.database import Base, engine, session_scope
from freezer.models import import_all_models
from freezer.services.user_service import get_user_by_email, set_user_role


def parse_args():
    parser = argparse.ArgumentParser(description="Set the role of an existing user.")
    parser.add_argument("email", help="Email address of the user.")
    parser.add_argument("role", choices=ROLES, help="Role to assign.")
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()

    import_all_models()
    Base.metadata.create_all(bind=engine)

    try:
        with session_scope() as db:
            user = get_user_by_email(db, args.email)
            if user is None:
                print("No user with email {}".format(args.email), file=sys.stderr)
                return 1
            set_user_role(db, None, user.uid, args.role)
    except FreezerError as exc:
        print(exc.message, file=sys.stderr)
        return 1
    print("Role for {} set to {}".format(args.email, args.role))
    return 0


if __name__ == "__main__":
    sys.exit(main())
