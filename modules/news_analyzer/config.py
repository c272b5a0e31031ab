"""
Configuration for the news analyzer: model layout on disk, thresholds and timeouts
"""

import os

# Model paths
MODELS_DIR = 'models'
MODEL_FILENAME = 'model.joblib'

# Prediction settings
PREDICTION_THRESHOLD = 0.5
RECENT_ANALYSES_LIMIT = 10

# Initialization settings
MAX_INIT_ATTEMPTS = 2
INIT_TIMEOUT = 5.0
DOMAIN_CHECK_TIMEOUT = 2.0

# Site lists
NEWS_DOMAINS_FILE = 'newsDomains.json'
CUSTOM_SITES_FILE = os.path.join('datasets', 'custom_news_sites.json')


class ModelSpec:
    """Static description of one classifier the analyzer runs on every text"""

    def __init__(self, name, directory, max_len, vocab_size, positive_label, negative_label,
                 flag_label, tokenizer_file, tokenizer_key, tokenizer_config_file=None,
                 uses_source=False, source_encoder_file=None, source_key=None,
                 source_vocab_size=None, model_file=MODEL_FILENAME):
        self.name = name
        self.directory = directory
        self.max_len = max_len
        self.vocab_size = vocab_size
        self.positive_label = positive_label
        self.negative_label = negative_label
        self.flag_label = flag_label
        self.tokenizer_file = tokenizer_file
        self.tokenizer_key = tokenizer_key
        self.tokenizer_config_file = tokenizer_config_file
        self.uses_source = uses_source
        self.source_encoder_file = source_encoder_file
        self.source_key = source_key
        self.source_vocab_size = source_vocab_size
        self.model_file = model_file

    def path(self, models_dir, filename):
        if not filename:
            return None
        return os.path.join(models_dir, self.directory, filename)


FAKE_NEWS_SPEC = ModelSpec(
    name='fake_news',
    directory='fake_news_model',
    max_len=300,
    vocab_size=20000,
    positive_label='verified',
    negative_label='unverified',
    flag_label='unverified',
    tokenizer_file='tokenizer.json',
    tokenizer_key='tokenizer_fake_news_text',
    uses_source=True,
    source_encoder_file='source_encoder.json',
    source_key='tokenizer_fake_news_source',
    source_vocab_size=2031
)

CLICKBAIT_SPEC = ModelSpec(
    name='clickbait',
    directory='clickbait_model',
    max_len=30,
    vocab_size=10000,
    positive_label='clickbait',
    negative_label='not_clickbait',
    flag_label='clickbait',
    tokenizer_file='word_index.json',
    tokenizer_key='tokenizer_clickbait',
    tokenizer_config_file='tokenizer_config.json'
)

DEFAULT_MODEL_SPECS = (FAKE_NEWS_SPEC, CLICKBAIT_SPEC)


class AnalyzerConfig:
    def __init__(self, models_dir=MODELS_DIR, session_file=None, news_domains_file=NEWS_DOMAINS_FILE,
                 custom_sites_file=CUSTOM_SITES_FILE, init_timeout=INIT_TIMEOUT,
                 domain_check_timeout=DOMAIN_CHECK_TIMEOUT, max_init_attempts=MAX_INIT_ATTEMPTS,
                 threshold=PREDICTION_THRESHOLD, model_specs=DEFAULT_MODEL_SPECS):
        self.models_dir = models_dir
        self.session_file = session_file
        self.news_domains_file = news_domains_file
        self.custom_sites_file = custom_sites_file
        self.init_timeout = init_timeout
        self.domain_check_timeout = domain_check_timeout
        self.max_init_attempts = max_init_attempts
        self.threshold = threshold
        self.model_specs = tuple(model_specs)

    @classmethod
    def from_env(cls, environ=None):
        """Build a config from NEWS_ANALYZER_* environment variables"""
        environ = os.environ if environ is None else environ
        return cls(
            models_dir=environ.get('NEWS_ANALYZER_MODELS_DIR', MODELS_DIR),
            session_file=environ.get('NEWS_ANALYZER_SESSION_FILE') or None,
            news_domains_file=environ.get('NEWS_ANALYZER_NEWS_DOMAINS_FILE', NEWS_DOMAINS_FILE),
            custom_sites_file=environ.get('NEWS_ANALYZER_CUSTOM_SITES_FILE', CUSTOM_SITES_FILE),
            init_timeout=float(environ.get('NEWS_ANALYZER_INIT_TIMEOUT', INIT_TIMEOUT))
        )

    def spec(self, name):
        for spec in self.model_specs:
            if spec.name == name:
                return spec
        raise KeyError(f"Unknown model '{name}'")
