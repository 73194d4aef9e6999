import os
from dotenv import load_dotenv

# Load environment variables from the .env file
load_dotenv()

class Config:
    """
    App configuration loaded from environment variables.

    Required:
      - SUPABASE_URL: project URL of the hosted backend
      - SUPABASE_ANON_KEY: anon/public key of the hosted backend
      - FONNTE_API_KEY: WhatsApp (Fonnte) API token
      - OPENAI_API_KEY: chat-completion API key

    Optional:
      (defaults)
      - FLASK_HOST: host to run the Flask app on (default: 0.0.0.0)
      - FLASK_PORT: port to run the Flask app on (default: 5000)
      - FLASK_DEBUG: enable/disable debug mode (default: true)
      - LOG_LEVEL: root log level (default: INFO)
      - CORS_ORIGINS: comma separated list of allowed SPA origins
      - STORAGE_BUCKET: storage bucket for selfies and documents (default: documents)
      - OPENAI_MODEL: chat-completion model (default: gpt-3.5-turbo)
      - DEFAULT_COUNTRY_CODE: WhatsApp country code (default: 62)

      (only required if using S3 for document images)
      - AWS_ACCESS_KEY
      - AWS_SECRET_KEY
      - S3_BUCKET_NAME
      - REGION_NAME: AWS region (default: ap-southeast-1)

    Copy .env.example -> .env and fill the required values.
    """
    # Flask
    FLASK_HOST = os.getenv('FLASK_HOST', '0.0.0.0')
    FLASK_PORT = int(os.getenv("FLASK_PORT", 5000))
    FLASK_DEBUG = os.getenv('FLASK_DEBUG', 'true').lower() == 'true'
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
    CORS_ORIGINS = [o.strip() for o in os.getenv('CORS_ORIGINS', 'http://localhost:5173').split(',') if o.strip()]

    # Supabase
    SUPABASE_URL = os.getenv('SUPABASE_URL')
    SUPABASE_ANON_KEY = os.getenv('SUPABASE_ANON_KEY')
    STORAGE_BUCKET = os.getenv('STORAGE_BUCKET', 'documents')
    PAYMENT_FUNCTION_NAME = os.getenv('PAYMENT_FUNCTION_NAME', 'processPayment')

    # AWS
    AWS_ACCESS_KEY = os.getenv('AWS_ACCESS_KEY')
    AWS_SECRET_KEY = os.getenv('AWS_SECRET_KEY')
    S3_BUCKET_NAME = os.getenv('S3_BUCKET_NAME')
    REGION_NAME = os.getenv('REGION_NAME', 'ap-southeast-1')

    # Fonnte (WhatsApp)
    FONNTE_API_URL = 'https://api.fonnte.com/send'
    FONNTE_API_KEY = os.getenv('FONNTE_API_KEY')
    DEFAULT_COUNTRY_CODE = os.getenv('DEFAULT_COUNTRY_CODE', '62')

    # OpenAI chat completion
    OPENAI_API_URL = 'https://api.openai.com/v1/chat/completions'
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
    OPENAI_MODEL = os.getenv('OPENAI_MODEL', 'gpt-3.5-turbo')
    CHATBOT_SYSTEM_PROMPT = os.getenv(
        'CHATBOT_SYSTEM_PROMPT',
        'Kamu adalah asisten rental mobil yang ramah. Jawablah pertanyaan pelanggan dengan sopan dan jelas.'
    )

    # Outbound HTTP timeout in seconds
    HTTP_TIMEOUT = float(os.getenv('HTTP_TIMEOUT', 30))

    # Opt-in flags to avoid accidental use of paid/third-party services
    # Set these to 'true' in your .env to enable the corresponding features.
    USE_S3 = os.getenv('USE_S3', 'false').lower() == 'true'

    @classmethod
    def validate_required(cls) -> None:
        """
        Validates that all required environment variables are set as class attributes.

        Raises:
            RuntimeError: If any of the required environment variables are missing,
            listing the names of the missing variables.
        """
        required_vars = [
            'SUPABASE_URL',
            'SUPABASE_ANON_KEY',
            'FONNTE_API_KEY',
            'OPENAI_API_KEY'
        ]
        if cls.USE_S3:
            required_vars += ['AWS_ACCESS_KEY', 'AWS_SECRET_KEY', 'S3_BUCKET_NAME']
        missing = [name for name in required_vars if not getattr(cls, name)]
        if missing:
            raise RuntimeError(f"Missing required config env vars: {', '.join(missing)}")
