from narrative_viz.config_model.model import load_config
cfg = load_config()  # reads config/config.toml by default
print("Project:", cfg.env.project_name)
print("Data:", cfg.data.path)
print("Canvas:", f"{cfg.canvas.width}x{cfg.canvas.height}", cfg.canvas.margin.model_dump())
print("Default scene:", cfg.scenes.default)
print("Events:", ", ".join(f"{e.date} {e.label}" for e in cfg.annotations.events))
