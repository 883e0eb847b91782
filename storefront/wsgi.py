from storefront.app.config import Config
from storefront.app.factory import create_app


def main(config_object: type[Config] = Config) -> None:
    """Run the development server on APP_HOST:APP_PORT."""
    app = create_app(config_object)
    app.run(host=app.config["APP_HOST"], port=app.config["APP_PORT"], debug=app.config.get("DEBUG", False))


if __name__ == "__main__":
    main()
