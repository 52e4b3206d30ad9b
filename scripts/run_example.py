import asyncio
import logging
import sys
from pathlib import Path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from sugars.logging_config import setup_logging
from sugars.adapters.canvas.read_json import load_graph_from_json
from sugars.core.build.config import ModelConfig
from sugars.core.build.validate import validate_graph, raise_on_errors
from sugars.core.store.store import ProcessGraphStore
from sugars.core.postprocess.summary import stream_table, balance_check
from sugars.core.postprocess.export import (
    export_model_json,
    export_streams_csv,
    export_streams_excel,
)

# Outputs
OUT_MODEL_JSON = "sugar-process-model.json"
OUT_STREAMS_CSV = "corrientes.csv"
OUT_STREAMS_XLSX = "balance.xlsx"


setup_logging(logging.INFO)

# 1) Modelo: JSON exportado (argumento) o planta de ejemplo
store = ProcessGraphStore(ModelConfig.from_dict({"delay_s": 0.0}))
if len(sys.argv) > 1:
    graph, _ = load_graph_from_json(sys.argv[1])
    store.set_graph(graph)
else:
    store.load_example()

# 2) Validación (solo advertencias no detienen)
issues = validate_graph(store.graph)
for it in issues:
    print(f"[{it.level}] {it.message}" + (f" | hint: {it.hint}" if it.hint else ""))
raise_on_errors(issues)

# 3) Simulación
result = asyncio.run(store.run_simulation())
if result is None:
    print("Sin nodo 'input': nada que simular.")
    sys.exit(1)

print("Simulación OK")
for section, values in result.to_dict().items():
    if section == "streamData":
        continue
    print(f"\n--- {section} ---")
    for k, v in values.items():
        print(f"{k:>20s} = {v:10.2f}")

print("\n--- Corrientes ---")
print(stream_table(store.graph, result).to_string(index=False, float_format=lambda x: f"{x:10.2f}"))
print("\nresiduos:", balance_check(result))

# 4) Exportar
export_model_json(store.graph, result, OUT_MODEL_JSON)
export_streams_csv(store.graph, result, OUT_STREAMS_CSV)
export_streams_excel(store.graph, result, OUT_STREAMS_XLSX)
print("\nEXPORT OK")
