from fastapi import FastAPI, Header, HTTPException
from fastapi.responses import JSONResponse

app = FastAPI(title="Mock Adyen Checkout", version="1.0.0")

API_KEY = "test_api_key"

PAYMENT_METHODS = [
    {
        "type": "ideal",
        "name": "iDEAL",
        "details": [
            {
                "key": "issuer",
                "type": "select",
                "items": [
                    {"id": "1121", "name": "Test Issuer"},
                    {"id": "1154", "name": "Test Issuer 5"},
                ],
            }
        ],
    },
    {"type": "scheme", "name": "Credit Card"},
    {"type": "sepadirectdebit", "name": "SEPA Direct Debit"},
    {"type": "directEbanking", "name": "SOFORT"},
    {"type": "unknown_method_x", "name": "Not mapped"},
]

# Payloads the return URL may carry, and the result they resolve to
RESULTS = {
    "authorised": "Authorised",
    "refused": "Refused",
    "pending": "Pending",
    "mystery": "SomethingNew",
}


def check_key(api_key: str | None) -> None:
    if api_key != API_KEY:
        raise HTTPException(status_code=401, detail="invalid api key")


def error(status: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content={"status": status, "errorCode": code, "message": message, "errorType": "validation"},
    )


@app.get("/health")
def health(): return {"status": "ok"}


@app.post("/v41/paymentMethods")
def payment_methods(body: dict, x_api_key: str | None = Header(None)):
    check_key(x_api_key)
    return {"paymentMethods": PAYMENT_METHODS}


@app.post("/v41/payments")
def payments(body: dict, x_api_key: str | None = Header(None)):
    check_key(x_api_key)
    method = body.get("paymentMethod", {})
    if method.get("type") == "ideal":
        if not method.get("issuer"):
            return error(422, "14_006", "Required field 'issuer' is not provided.")
        return {
            "resultCode": "redirectShopper",
            "pspReference": "8815000000000001",
            "redirect": {"method": "GET", "url": f"https://test.adyen.com/hpp/redirectIdeal.shtml?issuer={method['issuer']}"},
            "action": {"type": "redirect", "method": "GET", "url": "https://test.adyen.com/hpp/redirectIdeal.shtml"},
        }
    if method.get("type") == "sepadirectdebit":
        return {"resultCode": "Received", "pspReference": "8815000000000002"}
    return {"resultCode": "Authorised", "pspReference": "8815000000000003"}


@app.post("/v41/paymentSession")
def payment_session(body: dict, x_api_key: str | None = Header(None)):
    check_key(x_api_key)
    if "amount" not in body:
        return error(422, "100", "Required field 'amount' is not provided.")
    return {"paymentSession": f"session-for-{body.get('reference')}"}


@app.post("/v41/payments/details")
def payment_details(body: dict, x_api_key: str | None = Header(None)):
    check_key(x_api_key)
    payload = body.get("details", {}).get("payload")
    if payload not in RESULTS:
        return error(422, "101", "Invalid payload")
    return {"resultCode": RESULTS[payload], "pspReference": "8815000000000011"}


@app.post("/v41/payments/result")
def payment_result(body: dict, x_api_key: str | None = Header(None)):
    check_key(x_api_key)
    payload = body.get("payload")
    if payload not in RESULTS:
        return error(422, "101", "Invalid payload")
    return {"resultCode": RESULTS[payload], "pspReference": "8815000000000012"}
