import argparse
from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv()


def init_db():
    """Create every table known to the models."""
    from dealership.db import Base, engine
    import dealership.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    print("Database tables created.")


def promote_admin(email: str, revoke: bool = False) -> bool:
    """Grant (or revoke) the admin role for an existing account."""
    from dealership import crud
    from dealership.db import SessionLocal
    from dealership.models import ROLE_ADMIN, ROLE_CUSTOMER

    db = SessionLocal()
    try:
        user = crud.set_role(db, email, ROLE_CUSTOMER if revoke else ROLE_ADMIN)
    finally:
        db.close()
    if not user:
        print(f"No account found for {email}")
        return False
    print(f"{user.email} is now {user.role}")
    return True


def serve(host: str, port: int, reload: bool):
    import uvicorn

    uvicorn.run("dealership.main:app", host=host, port=port, reload=reload)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Dealership listings management")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="create database tables")

    promote = sub.add_parser("promote-admin", help="give an account the admin role")
    promote.add_argument("email")
    promote.add_argument("--revoke", action="store_true", help="demote back to customer")

    run = sub.add_parser("serve", help="run the API server")
    run.add_argument("--host", default="0.0.0.0")
    run.add_argument("--port", type=int, default=8000)
    run.add_argument("--reload", action="store_true")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    if args.command == "init-db":
        init_db()
    elif args.command == "promote-admin":
        if not promote_admin(args.email, revoke=args.revoke):
            raise SystemExit(1)
    elif args.command == "serve":
        serve(args.host, args.port, args.reload)


if __name__ == "__main__":
    main()
