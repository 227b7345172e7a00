# templates.py: inline Jinja templates rendered with render_template_string

BASE = r"""
<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <title>{{ page_title or "Capstone Materials" }}</title>
  <link href="https://cdnjs.cloudflare.com/ajax/libs/font-awesome/6.5.0/css/all.min.css" rel="stylesheet">
  <style>
    :root{
      --gap: 0.9rem; --radius: 8px; --btn-radius: 6px; --muted:#94a3b8; --brand:#7aa2ff; --danger:#ef4444;
      --bg:#060b1a; --text:#e5e7eb; --card-bg:#0b132b; --header-bg:#0e223c; --border:#1f2937; --hover:#142036;
      --overlay: rgba(0,0,0,.6);
    }
    *{ box-sizing: border-box; } html, body { height: 100%; }
    body { font-family: system-ui, -apple-system, Segoe UI, Roboto, Helvetica, Arial, sans-serif; background:var(--bg); color:var(--text); margin:0; }
    header { background:var(--header-bg); padding:0.8rem 1.2rem; display:flex; justify-content:space-between; align-items:center; gap:1rem; }
    header h1 { margin:0; font-size:1.4rem; letter-spacing:.04em; }
    header .sub { color:var(--muted); font-size:.9rem; margin:.2rem 0 0; }
    .top-right { display:flex; gap:.5rem; }
    .container { padding:1rem; max-width: min(2400px, 98vw); margin: 0 auto; }
    .flash { padding:0.45rem 0.7rem; border-radius:var(--radius); margin: 0 0 0.6rem 0; }
    .flash.success { background:#0f2a1b; color:#86efac; } .flash.info { background:#0f1530; color:#93c5fd; } .flash.danger { background:#2a0f14; color:#fda4af; }
    .status { color:var(--muted); letter-spacing:.04em; }

    .grid { display:grid; gap: var(--gap); grid-template-columns: repeat(var(--cols, 1), minmax(220px, 1fr)); overflow-x:auto; }
    .col { min-width: 0; display:flex; flex-direction:column; gap: var(--gap); }
    .group { background:var(--card-bg); padding:0.6rem; border-radius:var(--radius); border:1px solid var(--border); }
    .group.branch-right { border-left:3px solid var(--brand); }
    .group-title { font-weight:800; margin:0 0 .4rem; display:flex; align-items:center; gap:.4rem; }
    .group-dot { width:.55rem; height:.55rem; border-radius:999px; background:var(--brand); }
    .items { display:flex; flex-direction:column; gap: 0.25rem; min-height: 1rem; }
    .item { display:flex; align-items:center; gap:0.4rem; padding:0.25rem 0.35rem; border-radius:4px; cursor:grab; }
    .item:hover { background: var(--hover); }
    .item.dragging { opacity:.5; }
    .favicon { width:16px; height:16px; border-radius:3px; flex:0 0 auto; }
    .label { min-width:0; flex:1; overflow:hidden; text-overflow:ellipsis; white-space:nowrap; }
    .label a { color: var(--brand); text-decoration:none; }
    .label a:hover { text-decoration:underline; }
    .tools { display:flex; gap:.2rem; }
    .tools form { margin:0; }

    .btn { display:inline-flex; align-items:center; gap:0.35rem; background:var(--brand); color:#0b132b; text-decoration:none; border:0; padding:0.35rem 0.65rem; border-radius:var(--btn-radius); cursor:pointer; font-size:0.9rem; }
    .btn.small { padding: 0.15rem 0.35rem; font-size: 0.8rem; }
    .btn.ghost { background:var(--hover); color:inherit; }
    .btn.danger { background:var(--danger); color:#fff; }
    .muted { color: var(--muted); }

    .empty-state { text-align:center; padding:3rem 1rem; }
    .empty-title { font-size:1.2rem; font-weight:700; margin:.4rem 0; }

    .modal { display:none; position:fixed; inset:0; z-index:1000; background:var(--overlay); align-items:center; justify-content:center; padding:1rem; }
    .modal.show { display:flex; }
    .modal-box { background:var(--card-bg); width:min(560px, 96vw); border-radius:10px; border:1px solid var(--border); }
    .modal-head { display:flex; justify-content:space-between; align-items:center; padding:.8rem 1rem; border-bottom:1px solid var(--border); }
    .modal-head h3 { margin:0; font-size:1.05rem; }
    .modal-body { padding:1rem; }
    .modal-foot { display:flex; justify-content:flex-end; gap:.5rem; padding:.8rem 1rem; border-top:1px solid var(--border); }
    .modal label, .login label { display:block; margin:.4rem 0 .2rem; font-weight:600; }
    .modal input, .login input { width:100%; padding:.45rem .55rem; border-radius:6px; border:1px solid var(--border); background:#0f172a; color:inherit; }
    .login { max-width: 360px; margin: 3rem auto; }
    .xbtn { border:0; background:transparent; cursor:pointer; font-size:1.2rem; color:inherit; }
  </style>
  <script src="https://cdn.jsdelivr.net/npm/sortablejs@1.15.2/Sortable.min.js"></script>
</head>
<body>
  <header>
    <div>
      <h1>Capstone Materials</h1>
      <p class="sub">Space for all the dependencies</p>
    </div>
    {% if logged_in %}
    <div class="top-right">
      <button class="btn" type="button" data-action="add"><i class="fa-solid fa-plus"></i> Add Material</button>
      <a class="btn ghost" href="{{ url_for('logout') }}"><i class="fa-solid fa-right-from-bracket"></i> Logout</a>
    </div>
    {% endif %}
  </header>

  <div class="container">
    {% with messages = get_flashed_messages(with_categories=true) %}
      {% for category,msg in messages %}
        <div class="flash {{ category }}">{{ msg }}</div>
      {% endfor %}
    {% endwith %}
    <p class="status" id="status">{{ status or "" }}</p>

    {{ content|safe }}
  </div>
</body>
</html>
"""

INDEX = r"""
{% if empty %}
<div class="empty-state">
  <i class="fa-solid fa-box-open fa-2x muted"></i>
  <p class="empty-title">No materials yet</p>
  <p class="muted">Add your first link to start building the hub.</p>
  <button class="btn" type="button" data-action="add">Add First Material</button>
</div>
{% else %}
<div class="grid" id="grid" style="--cols: {{ columns|length }}">
  {% for column in columns %}
  {% set ci = loop.index0 %}
  <div class="col">
    {% for name, items in column.groups %}
    <div class="group {{ 'branch-left' if (ci + loop.index0) % 2 == 0 else 'branch-right' }}">
      <h3 class="group-title"><span class="group-dot"></span>{{ name }} <span class="muted">{{ items|length }}</span></h3>
      <div class="items" data-category="{{ name }}">
        {% for m in items %}
        <div class="item" data-id="{{ m.id }}" data-title="{{ m.title }}" data-category="{{ m.category }}" data-link="{{ m.link }}">
          {% set fav = (m.link|favicon) %}
          {% if fav %}<img class="favicon" src="{{ fav }}" alt="" referrerpolicy="no-referrer" onerror="this.remove();">{% endif %}
          <span class="label"><a href="{{ m.link }}" target="_blank" rel="noopener noreferrer">{{ m.title }}</a></span>
          <span class="tools">
            <button class="btn ghost small" type="button" data-action="edit" title="Edit"><i class="fa-solid fa-pen"></i></button>
            <form method="post" action="{{ url_for('delete_material', mid=m.id) }}"
                  data-title="{{ m.title }}" onsubmit="return confirm('Delete &quot;' + this.dataset.title + '&quot;? This cannot be undone.');">
              <input type="hidden" name="confirmed" value="1">
              <button class="btn danger small" type="submit" title="Delete"><i class="fa-solid fa-trash"></i></button>
            </form>
          </span>
        </div>
        {% endfor %}
      </div>
    </div>
    {% endfor %}
  </div>
  {% endfor %}
</div>
{% endif %}

<div class="modal" id="modal" aria-hidden="true">
  <div class="modal-box">
    <form method="post" id="materialForm" action="{{ url_for('save_material') }}">
      <div class="modal-head">
        <h3 id="modalTitle">Add new material</h3>
        <button class="xbtn" type="button" data-action="close">&times;</button>
      </div>
      <div class="modal-body">
        <input type="hidden" name="material_id" id="fId">
        <label for="fTitle">Title</label>
        <input name="title" id="fTitle" placeholder="System Flowchart" required>
        <label for="fCategory">Category</label>
        <input name="category" id="fCategory" list="categoryOptions" value="{{ categories[0] }}">
        <datalist id="categoryOptions">
          {% for c in categories %}<option value="{{ c }}">{% endfor %}
        </datalist>
        <label for="fLink">External link</label>
        <input name="link" id="fLink" placeholder="https://" required>
      </div>
      <div class="modal-foot">
        <button class="btn ghost" type="button" data-action="close">Cancel</button>
        <button class="btn" type="submit" id="modalSubmit">Add material</button>
      </div>
    </form>
  </div>
</div>

<script>
(function(){
  const modal = document.getElementById("modal");
  const f = {
    id: document.getElementById("fId"), title: document.getElementById("fTitle"),
    category: document.getElementById("fCategory"), link: document.getElementById("fLink"),
  };
  function openModal(item){
    f.id.value = item ? item.dataset.id : "";
    f.title.value = item ? item.dataset.title : "";
    f.category.value = item ? item.dataset.category : {{ categories[0]|tojson }};
    f.link.value = item ? item.dataset.link : "";
    document.getElementById("modalTitle").textContent = item ? "Edit material" : "Add new material";
    document.getElementById("modalSubmit").textContent = item ? "Save changes" : "Add material";
    modal.classList.add("show");
    f.title.focus();
  }
  document.addEventListener("click", (e) => {
    const btn = e.target.closest("[data-action]");
    if (!btn) return;
    const action = btn.dataset.action;
    if (action === "add") openModal(null);
    if (action === "edit") openModal(btn.closest(".item"));
    if (action === "close") modal.classList.remove("show");
  });

  const status = document.getElementById("status");
  document.querySelectorAll(".items").forEach((list) => {
    new Sortable(list, {
      group: {name: "items-" + list.dataset.category, pull: false, put: false},
      animation: 150, draggable: ".item", filter: ".tools", preventOnFilter: false,
      onEnd: (evt) => {
        if (evt.oldIndex === evt.newIndex) return;
        // the DOM already shows the new order; work out who was at newIndex before
        const ids = Array.from(list.querySelectorAll(".item")).map((el) => el.dataset.id);
        const before = ids.slice();
        const [moved] = before.splice(evt.newIndex, 1);
        before.splice(evt.oldIndex, 0, moved);
        fetch({{ url_for('reorder')|tojson }}, {
          method: "POST",
          headers: {"Content-Type": "application/json"},
          body: JSON.stringify({source_id: moved, target_id: before[evt.newIndex], category: list.dataset.category})
        }).then((r) => r.json()).then((data) => {
          status.textContent = data.error || "";
        }).catch((err) => { status.textContent = String(err); });
      }
    });
  });
})();
</script>
"""

LOGIN = """
<div class="login">
  <h2>Login</h2>
  <form method="post">
    <label for="username">Username</label>
    <input id="username" name="username" autocomplete="username" required>
    <label for="password">Password</label>
    <input id="password" type="password" name="password" autocomplete="current-password" required>
    <p><button class="btn" type="submit"><i class="fa-solid fa-right-to-bracket"></i> Login</button></p>
  </form>
</div>
"""
