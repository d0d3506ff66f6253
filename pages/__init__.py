from pages.home_page import HomePage
from pages.hybrid_help_page import HybridHelpPage
from pages.login_page import LoginPage

__all__ = ["LoginPage", "HomePage", "HybridHelpPage"]
