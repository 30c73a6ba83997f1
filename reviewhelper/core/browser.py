from __future__ import annotations

from selenium import webdriver
from selenium.webdriver import ChromeOptions, FirefoxOptions

from reviewhelper.config.schema import EnvironmentConfig

# lets navigator.clipboard.writeText run without a user prompt
CHROME_CLIPBOARD_PREFS = {
    "profile.content_settings.exceptions.clipboard": {
        "[*.],*": {"last_modified": "0", "setting": 1},
    },
}


class BrowserSession:
    """Starts the browser the helper drives, using Selenium Manager."""

    def __init__(self, environment: EnvironmentConfig) -> None:
        self.environment = environment

    def start(self, browser_name: str | None = None):
        normalized = (browser_name or self.environment.browser).lower()
        if normalized == "chrome":
            driver = webdriver.Chrome(options=self._chrome_options())
        elif normalized == "firefox":
            driver = webdriver.Firefox(options=self._firefox_options())
        else:
            raise ValueError(f"Unsupported browser: {normalized}")
        driver.set_page_load_timeout(self.environment.default_timeout_seconds)
        driver.implicitly_wait(0)
        return driver

    def _chrome_options(self) -> ChromeOptions:
        options = ChromeOptions()
        options.page_load_strategy = "eager"
        if self.environment.headless:
            options.add_argument("--headless=new")
        options.add_argument("--window-size=1440,1200")
        options.add_experimental_option("prefs", CHROME_CLIPBOARD_PREFS)
        return options

    def _firefox_options(self) -> FirefoxOptions:
        options = FirefoxOptions()
        options.page_load_strategy = "eager"
        if self.environment.headless:
            options.add_argument("-headless")
        options.set_preference("dom.events.asyncClipboard.clipboardItem", True)
        return options
