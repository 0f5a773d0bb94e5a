"""Constants for the faucet claimer."""

from typing import Dict, Final

CAPTCHA_TASK_TYPES: Final[Dict[str, str]] = {
    "api.2captcha.com": "RecaptchaV3TaskProxyless",
    "api.anti-captcha.com": "RecaptchaV3TaskProxyless",
    "api.capsolver.com": "ReCaptchaV3TaskProxyLess",
}

CAPTCHA_API_KEY_ENV: Final[str] = "CAPTCHA_API_KEY"

BROWSER_HEADERS: Final[Dict[str, str]] = {
    "Accept": "*/*",
    "Accept-Language": "en-US,en;q=0.9",
    "Content-Type": "application/json",
    "Priority": "u=1, i",
    "Sec-CH-UA": '"Not A(Brand";v="8", "Chromium";v="132", "Google Chrome";v="132"',
    "Sec-CH-UA-Mobile": "?0",
    "Sec-CH-UA-Platform": '"Windows"',
    "Sec-Fetch-Dest": "empty",
    "Sec-Fetch-Mode": "cors",
    "Sec-Fetch-Site": "same-origin",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}
