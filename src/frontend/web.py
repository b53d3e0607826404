from __future__ import annotations
import argparse
import logging
from flask import Flask, request, jsonify, Response
from werkzeug.exceptions import BadRequest

from isipython import config as CFG
from isipython.engine import Engine
from isipython.models import Position

log = logging.getLogger(__name__)

app = Flask(__name__)
_engine: Engine | None = None


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = Engine()
    return _engine


def _payload() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequest("expected a JSON object body")
    code = data.get("code", "")
    if code is not None and not isinstance(code, str):
        raise BadRequest("'code' must be a string")
    return data


@app.errorhandler(BadRequest)
@app.errorhandler(ValueError)
def _bad_request(exc):
    msg = exc.description if isinstance(exc, BadRequest) else str(exc)
    return jsonify({"error": msg}), 400


# ---------- API ----------
@app.get("/health")
def health():
    return jsonify({"ok": True, "keywords": len(get_engine().table)})


@app.get("/api/keywords")
def api_keywords():
    return jsonify(get_engine().keywords())


@app.post("/api/translate")
def api_translate():
    data = _payload()
    code = data.get("code") or ""
    direction = data.get("direction", "auto")
    eng = get_engine()
    if direction == "forward":
        return jsonify({"translatedCode": eng.translate_forward(code),
                        "sourceLanguage": "isipython", "targetLanguage": "python"})
    if direction == "reverse":
        return jsonify({"translatedCode": eng.translate_reverse(code),
                        "sourceLanguage": "python", "targetLanguage": "isipython"})
    if direction == "auto":
        return jsonify(eng.auto_translate(code).to_dict())
    raise ValueError(f"unknown direction {direction!r} (forward|reverse|auto)")


@app.post("/api/validate")
def api_validate():
    code = _payload().get("code") or ""
    return jsonify([d.to_dict() for d in get_engine().validate(code)])


@app.post("/api/complete")
def api_complete():
    data = _payload()
    code = data.get("code") or ""
    try:
        pos = Position(int(data.get("line", 1)), int(data.get("column", 1)))
    except (TypeError, ValueError):
        raise BadRequest("'line' and 'column' must be integers")
    return jsonify([s.to_dict() for s in get_engine().complete(code, pos)])


@app.post("/api/tokens")
def api_tokens():
    code = _payload().get("code") or ""
    return jsonify([t.to_dict() for t in get_engine().tokenize(code)])


# ---------- UI ----------
@app.get("/")
def home():
    # One page, no external deps: textarea + debounced validation + translate.
    html = r"""
<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width,initial-scale=1" />
<title>isiPython • Editor</title>
<style>
:root{ --bg:#0b0f14; --panel:#0f141b; --ink:#cfd8e3; --muted:#8a94a6; --accent:#6ee7ff;
       --border:#1c2530; --danger:#ff5d5d; --ok:#45d483; }
*{box-sizing:border-box}
body{ margin:0; background:var(--bg); color:var(--ink);
      font:15px/1.45 system-ui,-apple-system,Segoe UI,Roboto,Ubuntu,Arial; }
.container{ max-width:1100px; margin:24px auto; padding:0 16px; }
.card{ background:var(--panel); border:1px solid var(--border); border-radius:16px; padding:18px; }
h1{ font-size:20px; margin:0 0 8px 0; }
.grid{ display:grid; grid-template-columns:1fr 1fr; gap:12px; }
textarea, pre{ width:100%; min-height:340px; padding:12px; border-radius:12px; border:1px solid var(--border);
  background:#0b1117; color:var(--ink); font-family:ui-monospace,Menlo,Consolas,monospace; font-size:14px; margin:0; }
.btn{ padding:8px 14px; border-radius:10px; border:1px solid var(--border); background:#0b1117; color:var(--ink); cursor:pointer; }
.btn:hover{ border-color:var(--accent) }
.meta{ color:var(--muted); font-size:13px; margin:8px 0; }
.diag{ font-family:ui-monospace,Menlo,Consolas,monospace; font-size:13px; }
.diag .error{ color:var(--danger) } .diag .ok{ color:var(--ok) }
</style>
</head>
<body>
  <div class="container">
    <div class="card">
      <h1>isiPython</h1>
      <div class="meta">Bhala ikhowudi yakho • diagnostics refresh 500 ms after you stop typing</div>
      <div class="grid">
        <textarea id="src" spellcheck="false">chaza add(a, b):
    buyisela a + b

ukuba add(2, 3) > 4:
    print("kulungile")
</textarea>
        <pre id="out"></pre>
      </div>
      <div class="meta">
        <button id="fwd" class="btn">isiPython → Python</button>
        <button id="rev" class="btn">Python → isiPython</button>
      </div>
      <div id="diag" class="diag"></div>
    </div>
  </div>
<script>
const $ = (s) => document.querySelector(s);
const src = $("#src"), out = $("#out"), diag = $("#diag");
async function post(path, body){
  const r = await fetch(path, {method:"POST", headers:{"Content-Type":"application/json"}, body:JSON.stringify(body)});
  if(!r.ok) throw new Error(`HTTP ${r.status}`);
  return r.json();
}
async function validate(){
  try{
    const rows = await post("/api/validate", {code: src.value});
    diag.innerHTML = rows.length === 0 ? '<div class="ok">No problems.</div>'
      : rows.map(d => `<div class="error">${d.line}:${d.column} [${d.code}] ${d.message}</div>`).join("");
  }catch(e){ diag.textContent = `Error: ${e.message ?? e}`; }
}
async function translate(direction){
  const r = await post("/api/translate", {code: src.value, direction});
  out.textContent = r.translatedCode;
}
let t; // debounce timer
src.addEventListener("input", () => { clearTimeout(t); t = setTimeout(validate, 500); });
$("#fwd").addEventListener("click", () => translate("forward"));
$("#rev").addEventListener("click", () => translate("reverse"));
validate();
</script>
</body>
</html>
"""
    return Response(html, mimetype="text/html")


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Run the isiPython Flask API + editor page")
    ap.add_argument("--host", default=CFG.HOST)
    ap.add_argument("--port", type=int, default=CFG.PORT)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)
    serve(args.host, args.port, verbose=args.verbose)
    return 0


def serve(host: str, port: int, *, verbose: bool = False) -> None:
    if verbose:
        logging.basicConfig(level=logging.INFO)
    get_engine()
    log.info("Serving isiPython on http://%s:%d", host, port)
    app.run(host=host, port=port, debug=verbose)


if __name__ == "__main__":
    raise SystemExit(main())
