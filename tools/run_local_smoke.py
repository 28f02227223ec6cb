"""
Quick local smoke test: run the detector (env configuration) over a few sample
URLs and print one JSON line per URL with score, level and flags.

Run: python3 tools/run_local_smoke.py
"""
import json

from phishcheck.app.scanner import build_detector

SAMPLES = [
    "https://www.paypal.com/",
    "http://192.168.1.1/login",
    "https://paypal-security-alert.tk/",
    "http://secure.login.account.example.xyz:8080//redirect?verify=1",
    "not a url",
]


def main():
    detector = build_detector()
    print("thresholds:", detector.config.thresholds.as_dict())
    print("network signal:", type(detector.network_signal).__name__ if detector.network_signal else None)
    for u in SAMPLES:
        res = detector.analyze(u)
        print(json.dumps({
            "url": u,
            "risk_score": res.risk_score,
            "risk_level": res.risk_level,
            "flags": list(res.flags),
        }))


if __name__ == '__main__':
    main()
