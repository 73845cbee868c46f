"""
Per-framework instructions, output checks and fallbacks for animation generation.
"""

import textwrap
from typing import Callable, Dict, NamedTuple

from ggbench.constants import FRAMEWORK

P5JS_SETUP = textwrap.dedent("""\
    function setup() {
      createCanvas(400, 400);
    }
    """)


class FrameworkTemplate(NamedTuple):
    instructions: str
    is_valid: Callable[[str], bool]
    finalize: Callable[[str], str]
    fallback: str


def _p5js_is_valid(code: str) -> bool:
    return "function draw" in code


def _p5js_finalize(code: str) -> str:
    if "function setup" not in code:
        code = f"{P5JS_SETUP}\n{code}"
    return code.strip()


def _threejs_is_valid(code: str) -> bool:
    return "THREE." in code and "requestAnimationFrame" in code


def _svg_is_valid(code: str) -> bool:
    lowered = code.lower()
    return "<svg" in lowered and "</svg>" in lowered


def _strip(code: str) -> str:
    return code.strip()


TEMPLATES: Dict[FRAMEWORK, FrameworkTemplate] = {
    FRAMEWORK.P5JS: FrameworkTemplate(
        instructions=textwrap.dedent("""\
            Generate p5.js code for the following animation description.
            The code must start with:
            function setup() {
              createCanvas(400, 400);
            }

            And include a draw() function. The code should be complete and runnable.
            Make sure to use proper p5.js syntax and functions.
            Return only the code in a single ```javascript block.

            Animation description: """),
        is_valid=_p5js_is_valid,
        finalize=_p5js_finalize,
        fallback=textwrap.dedent("""\
            function setup() {
              createCanvas(400, 400);
            }

            function draw() {
              background(220);
              textAlign(CENTER, CENTER);
              textSize(16);
              fill(0);
              text("Animation generation failed", width / 2, height / 2);
            }"""),
    ),
    FRAMEWORK.THREEJS: FrameworkTemplate(
        instructions=textwrap.dedent("""\
            Generate Three.js code for the following animation description.
            Assume the global THREE object is already loaded and a container element
            with id "container" of size 400x400 exists. Create the scene, camera and
            renderer yourself, append the renderer's canvas to the container and drive
            the animation with requestAnimationFrame.
            Return only the code in a single ```javascript block.

            Animation description: """),
        is_valid=_threejs_is_valid,
        finalize=_strip,
        fallback=textwrap.dedent("""\
            const container = document.getElementById("container");
            const scene = new THREE.Scene();
            const camera = new THREE.PerspectiveCamera(75, 1, 0.1, 1000);
            const renderer = new THREE.WebGLRenderer();
            renderer.setSize(400, 400);
            container.appendChild(renderer.domElement);
            const cube = new THREE.Mesh(
              new THREE.BoxGeometry(),
              new THREE.MeshBasicMaterial({ color: 0x888888, wireframe: true })
            );
            scene.add(cube);
            camera.position.z = 3;
            function animate() {
              requestAnimationFrame(animate);
              cube.rotation.y += 0.01;
              renderer.render(scene, camera);
            }
            animate();"""),
    ),
    FRAMEWORK.SVG: FrameworkTemplate(
        instructions=textwrap.dedent("""\
            Generate a self-contained animated SVG for the following animation description.
            Use a 400x400 viewBox and animate with SMIL or embedded CSS; do not use
            external resources or scripts.
            Return only the markup in a single ```svg block.

            Animation description: """),
        is_valid=_svg_is_valid,
        finalize=_strip,
        fallback=textwrap.dedent("""\
            <svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 400 400" width="400" height="400">
              <rect width="400" height="400" fill="#dcdcdc"/>
              <text x="200" y="200" text-anchor="middle" font-size="16">Animation generation failed</text>
            </svg>"""),
    ),
}


def build_prompt(framework: FRAMEWORK, description: str) -> str:
    return TEMPLATES[framework].instructions + description
